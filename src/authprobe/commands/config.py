"""Config commands -- view and modify global configuration.

Provides the ``authprobe config`` sub-command group for reading, updating
and resetting the user's global configuration file
(:class:`~authprobe.models.GlobalConfig`): probe timeout, SSL
verification, User-Agent and output format.
"""

from __future__ import annotations

import typer

from authprobe.exit_codes import EXIT_INVALID_USAGE
from authprobe.output import error, info, print_settings, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        authprobe config show
        authprobe --json config show
    """
    from authprobe.config import get_config_dir, load_global_config
    from authprobe.exceptions import AuthProbeError

    try:
        config = load_global_config()
    except AuthProbeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    print_settings(config.model_dump(mode="json"), title="Configuration")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'probe.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, float, or str) and the result is
    validated against :class:`~authprobe.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With :data:`~authprobe.exit_codes.EXIT_INVALID_USAGE` if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        authprobe config set probe.timeout 10
        authprobe config set probe.verify_ssl false
        authprobe config set output.format json
    """
    from authprobe.config import load_global_config, parse_bool, save_global_config
    from authprobe.exceptions import AuthProbeError
    from authprobe.models import GlobalConfig

    try:
        config = load_global_config()
    except AuthProbeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    current = target[final_key]
    if isinstance(current, bool):
        coerced = parse_bool(value)
        if coerced is None:
            error(f"Expected true or false for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
    elif isinstance(current, (int, float)):
        try:
            coerced = type(current)(value)
        except ValueError:
            error(f"Expected {type(current).__name__} for {key}, got: {value}")
            raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    else:
        coerced = value  # type: ignore[assignment]

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except Exception as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is given.
    """
    from authprobe.config import save_global_config
    from authprobe.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
