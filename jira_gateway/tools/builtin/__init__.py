"""Auto-import builtin tool modules to trigger @register_tool decorators.

Import order is catalog order.
"""
from . import issues
from . import search
from . import project
from . import sprint
from . import reports
from . import worklog
from . import watch
from . import links
from . import labels
from . import attachments
