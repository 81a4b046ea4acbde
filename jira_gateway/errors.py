"""Gateway exceptions. All of them are turned into error envelopes at the dispatch boundary."""


class GatewayError(Exception):
    """Base class for expected, recoverable gateway failures."""


class UnknownTool(GatewayError):
    def __init__(self, name: str):
        super().__init__(f"unknown tool '{name}'")
        self.name = name


class DuplicateName(GatewayError):
    def __init__(self, name: str):
        super().__init__(f"tool already registered: {name}")
        self.name = name


class ValidationError(GatewayError):
    def __init__(self, parameter: str, reason: str):
        super().__init__(f"parameter '{parameter}' {reason}")
        self.parameter = parameter
        self.reason = reason


class ConfigError(GatewayError):
    """Required configuration is absent. Raised at first use, never at import."""
