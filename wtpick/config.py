"""Configuration loading.

Reads `.wtpick.toml` (project-level) and `~/.config/wtpick/config.toml` (global),
merges them, and fills missing values with built-in defaults.
"""

import tomllib
from pathlib import Path

from pydantic import BaseModel, ValidationError

from wtpick.constants import (
    CONFIG_DIR,
    DEFAULT_CREATE_PROMPT,
    DEFAULT_DELETE_KEY,
    DEFAULT_PROMPT,
    DEFAULT_TOGGLE_FORCE_KEY,
    DEFAULT_WITH_NTH,
    PROJECT_CONFIG_NAME,
)

_SECTIONS = ("picker", "keys", "delete")


class ConfigError(RuntimeError):
    """Raised when a config file cannot be read or validated."""


class PickerConfig(BaseModel):
    prompt: str = ""
    create_prompt: str = ""
    with_nth: list[int] = []


class KeysConfig(BaseModel):
    delete: str = ""
    toggle_force: str = ""


class DeleteConfig(BaseModel):
    confirm_deletions: bool | None = None
    # Older option name, honoured when confirm_deletions is unset
    confirm_telescope_deletions: bool | None = None


class WTConfig(BaseModel):
    picker: PickerConfig = PickerConfig()
    keys: KeysConfig = KeysConfig()
    delete: DeleteConfig = DeleteConfig()


class ConfirmPolicy(BaseModel):
    confirm_deletions: bool | None = None
    confirm_telescope_deletions: bool | None = None

    @property
    def required(self) -> bool:
        if self.confirm_deletions is not None:
            return self.confirm_deletions
        return bool(self.confirm_telescope_deletions)


class ResolvedConfig(BaseModel):
    """Flat config with all values guaranteed filled."""

    repo_root: Path | None
    prompt: str
    create_prompt: str
    with_nth: list[int]
    delete_key: str
    toggle_force_key: str
    confirm_deletions: bool | None
    confirm_telescope_deletions: bool | None

    @property
    def confirm_policy(self) -> ConfirmPolicy:
        return ConfirmPolicy(
            confirm_deletions=self.confirm_deletions,
            confirm_telescope_deletions=self.confirm_telescope_deletions,
        )


def global_config_path() -> Path:
    return CONFIG_DIR / "config.toml"


def project_config_path(repo_root: Path) -> Path:
    return repo_root / PROJECT_CONFIG_NAME


def save_project_config(repo_root: Path, config: WTConfig) -> Path:
    """Save project-level .wtpick.toml. Returns the path written."""
    path = project_config_path(repo_root)
    lines: list[str] = []
    for section_name in _SECTIONS:
        section = getattr(config, section_name)
        section_lines: list[str] = []
        for field_name, field_info in type(section).model_fields.items():
            value = getattr(section, field_name)
            if value is None:
                continue
            if value != field_info.default:
                section_lines.append(f"{field_name} = {_toml_value(value)}")
        if section_lines:
            lines.append(f"[{section_name}]")
            lines.extend(section_lines)
            lines.append("")
    path.write_text("\n".join(lines) + "\n" if lines else "")
    return path


def _toml_value(value: object) -> str:
    """Format a Python value as TOML."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        items = ", ".join(_toml_value(v) for v in value)
        return f"[{items}]"
    if isinstance(value, str):
        return f'"{_escape_toml_str(value)}"'
    return str(value)


def _escape_toml_str(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


def load_toml(path: Path) -> WTConfig:
    if not path.exists():
        return WTConfig()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return WTConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def _merge_configs(project: WTConfig, global_: WTConfig) -> WTConfig:
    """Merge project over global. Non-default project values win."""
    merged = WTConfig()
    for section in _SECTIONS:
        proj_section = getattr(project, section)
        glob_section = getattr(global_, section)
        merged_section = getattr(merged, section)
        for field_name in type(proj_section).model_fields:
            proj_val = getattr(proj_section, field_name)
            glob_val = getattr(glob_section, field_name)
            default_val = type(merged_section).model_fields[field_name].default
            if proj_val != default_val:
                setattr(merged_section, field_name, proj_val)
            elif glob_val != default_val:
                setattr(merged_section, field_name, glob_val)
    return merged


def load_config(repo_root: Path | str | None = None) -> ResolvedConfig:
    """Load and resolve configuration.

    Args:
        repo_root: Repository root, or None outside a repository (global config only).
    """
    root = Path(repo_root) if repo_root else None
    global_cfg = load_toml(global_config_path())
    project_cfg = load_toml(project_config_path(root)) if root else WTConfig()
    merged = _merge_configs(project_cfg, global_cfg)

    return ResolvedConfig(
        repo_root=root,
        prompt=merged.picker.prompt or DEFAULT_PROMPT,
        create_prompt=merged.picker.create_prompt or DEFAULT_CREATE_PROMPT,
        with_nth=merged.picker.with_nth or list(DEFAULT_WITH_NTH),
        delete_key=merged.keys.delete or DEFAULT_DELETE_KEY,
        toggle_force_key=merged.keys.toggle_force or DEFAULT_TOGGLE_FORCE_KEY,
        confirm_deletions=merged.delete.confirm_deletions,
        confirm_telescope_deletions=merged.delete.confirm_telescope_deletions,
    )


def parse_config_value(raw: str, current: object) -> object:
    """Parse a CLI-supplied string into the type of the field it replaces."""
    if isinstance(current, bool) or current is None:
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
        raise ConfigError(f"Expected a boolean, got {raw!r}")
    if isinstance(current, list):
        try:
            return [int(s.strip()) for s in raw.split(",") if s.strip()]
        except ValueError as e:
            raise ConfigError(f"Expected comma-separated integers, got {raw!r}") from e
    return raw
