class ERC20:
    def __init__(self, name: str, symbol: str):
        self.name = name
        self.symbol = symbol
        self.balances = {}

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)
