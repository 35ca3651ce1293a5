"""Built-in analyzers.

Each module registers its analyzer with the default registry on import.
"""
