"""Release packaging pipeline for the RuaFlashTool command line bundle."""

__version__ = "1.0.0rc2"
