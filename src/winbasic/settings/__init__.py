"""
Settings for the gateway.

Example:
    ```python
    from winbasic.settings import GatewaySettings

    settings = GatewaySettings.from_file("~/.winbasic/config.yaml")
    print(settings.shell.default_timeout_ms)
    ```
"""

from winbasic.settings.config import GatewaySettings

__all__ = ["GatewaySettings"]
