"""Basic SVG to PNG / ICO conversion examples."""

from svgbuild import ICON_SIZES, ResourceLimits, TargetSize, convert, load_picture
from svgbuild.ico import read_directory
from svgbuild.rasterizer import render

# Example 1: PNG at the document's natural size
print("Example 1: PNG conversion")
convert("input.svg", "output.png")
print("✓ Created output.png")

# Example 2: Multi-resolution icon
print("\nExample 2: ICO conversion")
convert("input.svg", "output.ico", output_format="ico", max_workers=4)
with open("output.ico", "rb") as f:
    entries = read_directory(f.read())
print(f"✓ Created output.ico with {len(entries)} frames ({len(ICON_SIZES)} expected)")

# Example 3: resvg backend without a timeout
print("\nExample 3: resvg backend")
convert("input.svg", "output_resvg.png", backend="resvg", limits=ResourceLimits(timeout=0))
print("✓ Created output_resvg.png")

# Example 4: Rendering a custom size
print("\nExample 4: Custom size")
with load_picture("input.svg") as picture:
    with render(picture, TargetSize(512, 256)) as image:
        image.to_pil().save("output_512x256.png")
print("✓ Created output_512x256.png")
