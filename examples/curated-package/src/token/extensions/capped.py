from ..erc20 import ERC20


class CappedERC20(ERC20):
    def __init__(self, name: str, symbol: str, cap: int):
        super().__init__(name, symbol)
        self.cap = cap
