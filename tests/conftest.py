"""Root test configuration: session-level cleanup and a sample blog tree"""

from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdcheck.db", "test.db"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()


SINGLETON_MD = """\
---
title: "Синглтон: за и против"
date: 2019-03-14T10:00:00+03:00
draft: false
categories: [design]
tags: [csharp, patterns]
aliases:
  - /old/singleton/
---

# Введение

Смотрите также [декоратор](decorator/index.md#пример) и
[проекты](/projects/).

## Реализация

```csharp
public sealed class Singleton {}
```
"""

DECORATOR_MD = """\
+++
title = "Декоратор"
date = 2019-05-01
tags = ["csharp", "patterns"]
categories = ["design"]
+++

## Пример

![схема](diagram.png)

Логотип: ![logo](/images/logo.png)

{{< ref "singleton.md#реализация" >}}
"""

PROJECTS_MD = """\
---
title: Проекты
date: 2020-01-01
---

Список проектов. Назад к [синглтону](/old/singleton/).
"""


@pytest.fixture(name="blog")
def blog_fixture(tmp_path, monkeypatch):
    """A clean content/ + static/ tree in tmp_path, which becomes the cwd."""
    content = tmp_path / "content"
    posts = content / "posts"
    bundle = posts / "decorator"
    bundle.mkdir(parents=True)
    (posts / "singleton.md").write_text(SINGLETON_MD, encoding="utf-8")
    (bundle / "index.md").write_text(DECORATOR_MD, encoding="utf-8")
    (bundle / "diagram.png").write_bytes(b"\x89PNG")
    (content / "projects.md").write_text(PROJECTS_MD, encoding="utf-8")
    images = tmp_path / "static" / "images"
    images.mkdir(parents=True)
    (images / "logo.png").write_bytes(b"\x89PNG")
    monkeypatch.chdir(tmp_path)
    return tmp_path
