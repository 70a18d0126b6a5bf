"""Config models and loader.

This module defines Pydantic models for the YAML query tree and the exporter
file, plus environment-based settings. The query tree (``MBeanQuery``) uses
the key names of the WebLogic exporter YAML format (``label_name``,
``metric_prefix``, ``string_fields``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError


class StringField(BaseModel):
    """An mBean attribute that returns one of a known set of strings.

    The value set should contain every string the attribute can return so the
    exporter can emit a stable series per possible value. It is not meant for
    arbitrary strings, rather things like deployment states.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    value_set: List[str] = Field(default_factory=list)


class MBeanQuery(BaseModel):
    """Configuration for one mBean and its children.

    Attributes
    ----------
    label_name: Optional[str]
        Name of the label attached to metrics from this mBean.
    label_value_attribute: Optional[str]
        Which mBean attribute supplies the value of ``label_name``.
    metric_prefix: str
        Prefix prepended to every metric emitted for this mBean.
    fields: List[str]
        Attributes that return numeric data.
    string_fields: List[StringField]
        Attributes that return one of a known set of strings. They are exported
        as one series per possible value, 1 for the current state, 0 otherwise.
    children: Dict[str, MBeanQuery]
        Child mBeans to query, keyed by mBean name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    label_name: Optional[str] = None
    label_value_attribute: Optional[str] = None
    metric_prefix: str = ""
    fields: List[str] = Field(default_factory=list)
    string_fields: List[StringField] = Field(default_factory=list)
    children: Dict[str, "MBeanQuery"] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_label_pair(self) -> "MBeanQuery":
        if self.label_name and not self.label_value_attribute:
            raise ValueError(
                f"Cannot parse config at label_name: {self.label_name}. "
                "Must provide label_value_attribute if providing a label_name"
            )
        if self.label_value_attribute and not self.label_name:
            raise ValueError(
                "Cannot parse config at label_value_attribute: "
                f"{self.label_value_attribute}. "
                "Must provide label_name if providing a label_value_attribute"
            )
        return self

    def is_empty(self) -> bool:
        """Return True when the node queries no attributes and no children."""
        return not (self.fields or self.string_fields or self.children)


class ExporterConfig(BaseModel):
    """Top-level exporter configuration file.

    Attributes
    ----------
    listen_address: str
        ``[HOST]:PORT`` to serve ``/metrics`` on.
    host, port, scheme: str, int, str
        Location of the WebLogic admin server to probe.
    username, password: Optional[str]
        Basic-auth credentials for the WebLogic REST API.
    timeout_seconds: float
        Transport timeout for one probe request.
    cert_path, key_path: Optional[str]
        When both are set, ``/metrics`` is served over TLS.
    queries: MBeanQuery
        Root of the query tree (the ``serverRuntime`` mBean).
    """

    model_config = ConfigDict(extra="forbid")

    listen_address: str = ":9601"
    host: str = "127.0.0.1"
    port: int = Field(7001, ge=1, le=65535)
    scheme: Literal["http", "https"] = "http"
    verify_tls: bool = True
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: float = Field(10.0, gt=0)
    cert_path: Optional[str] = None
    key_path: Optional[str] = None
    queries: MBeanQuery = Field(default_factory=MBeanQuery)

    @model_validator(mode="after")
    def _validate_tls_pair(self) -> "ExporterConfig":
        if bool(self.cert_path) != bool(self.key_path):
            raise ValueError("cert_path and key_path must be provided together")
        return self

    @property
    def target(self) -> str:
        """Identity of the probed instance, used for logging."""
        return f"{self.host}:{self.port}"

    @staticmethod
    def load(path: Path) -> "ExporterConfig":
        """Load exporter config from a YAML file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read, is not valid YAML, or does not
            validate against the model.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise ConfigurationError(
                f"Failed to read config file {path}: {exc}"
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        return ExporterConfig.from_dict(data)

    @staticmethod
    def from_dict(data: object) -> "ExporterConfig":
        """Validate an already-parsed mapping into an ``ExporterConfig``."""
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at top level")
        try:
            return ExporterConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    config: Optional[str]
        Path to the exporter YAML file used by ``create_app()``.
    username: Optional[str]
        Default WebLogic username when the config file does not set one.
    password: Optional[str]
        Default WebLogic password when the config file does not set one.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="WLS_EXPORTER_")

    log_level: str = Field("INFO")
    config: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
