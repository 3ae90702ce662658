"""Command topic modules for nginx-controller CLI."""

from . import cert as cert
from . import ingress as ingress
from . import nginx as nginx
