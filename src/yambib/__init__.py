"""Typed bibliography records loaded from YAML.

Usage Example

```pycon
>>> import yambib
>>> entries = yambib.load('''
... turing1950:
...   type: article
...   title: Computing Machinery and Intelligence
...   author: Turing, Alan Mathison
...   page-range: 433-460
...   parent:
...     type: periodical
...     title: Mind
... ''')
>>> article = entries[0]
>>> article.get_authors()[0].given_name
'Alan Mathison'
>>> article.get_page_total()
27
>>> spec = yambib.EntryTypeSpec.of(
...     yambib.EntryType.ARTICLE,
...     parents=[yambib.EntryTypeSpec.of(yambib.EntryType.PERIODICAL)],
... )
>>> article.check_with_spec(spec)
True
```
"""

from __future__ import annotations

from yambib.core import *  # noqa: F403
from yambib.core import __all__ as _core_all
from yambib.version import get_version


__version__ = get_version()

__all__ = [*_core_all, "__version__", "get_version"]
