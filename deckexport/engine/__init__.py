"""Export engine: unit normalization, style mapping, resources, slide assembly.

Import submodules directly (``deckexport.engine.units`` etc.); the assembler
depends on the renderer package, which in turn depends on the other engine
modules.
"""
