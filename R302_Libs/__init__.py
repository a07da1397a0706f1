"""
R302_Libs - Room 302 generative art toolkit.

Sub-packages:
    ProceduralLib: Seeded hashing, PRNG and Perlin noise
    ConstellationLib: Constellation layout and SVG overlay markup
    ColorLib: Color spaces, perturbations and harmonies
    GlitchLib: Pixel glitch filters and PNG codec
    BatchLib: Quote corpus, templates, rasterization and batch runs
"""

__version__ = "0.1.0"
