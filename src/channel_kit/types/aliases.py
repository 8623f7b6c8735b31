"""Type aliases using PEP 695 syntax."""

from collections.abc import Mapping

# Raw key/value mapping handed to ConnectionSettings and the settings validators
type SettingsMapping = Mapping[str, object]
