__version__ = "1.0.0"
__description__ = "pizzapi : JSON:API backend for pizza recipes"
