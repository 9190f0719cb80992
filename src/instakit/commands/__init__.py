"""Built-in CLI commands for instakit.

* :mod:`~instakit.commands.configure` -- write or show ``settings.json``.
* :mod:`~instakit.commands.auth` -- ``login``, ``logout``, ``status`` and
  ``token``.
* :mod:`~instakit.commands.api` -- ``request`` and ``me``.
* :mod:`~instakit.commands.context` -- session construction and result
  handling shared by the commands.

Each command is a plain callback registered on the root app in
:mod:`instakit.app`.
"""
