"""
krakenwrap: kraken2 -> taxonomy -> Krona pipeline over reads and assemblies.
"""
__version__ = "1.0.0"
