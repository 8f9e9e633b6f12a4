def trusted_forwarder_sender(sender: str, calldata: bytes) -> str:
    """Extract the original sender appended to the calldata by a forwarder."""
    return "0x" + calldata[-20:].hex()
