"""Built-in CLI sub-commands for authprobe.

* :mod:`~authprobe.commands.detect` -- probe servers and print the
  credential type (``detect``) or the raw schemes (``schemes``).
* :mod:`~authprobe.commands.config` -- view and modify global settings.

``detect`` and ``schemes`` are plain callbacks registered on the root app;
``config`` is a :class:`typer.Typer` sub-application.
"""
