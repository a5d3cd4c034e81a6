"""
neurorbm: núcleo de activación estocástica y banco de gradientes para capas
RBM, usables solas o como capas de una DBN.
"""

__version__ = "0.1.0"
