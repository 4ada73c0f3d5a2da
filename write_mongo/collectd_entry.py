"""Module named in collectd's ``Import`` option; registers the plugin on import."""

from .collectd_host import register

HOST = register()
