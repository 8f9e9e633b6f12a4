from .erc20 import ERC20

__all__ = ["ERC20"]
