"""Pytest configuration and shared fixtures for unfence tests."""

import pytest

from unfence.settings import AppSettings
from unfence.settings import SettingsPaths

FENCE = "```"


@pytest.fixture
def settings_paths(tmp_path):
    """Settings paths isolated under a temp directory."""
    return SettingsPaths(
        global_settings=tmp_path / "home" / ".unfence" / "settings.yaml",
        project_settings=tmp_path / "project" / ".unfence" / "settings.yaml",
        local_settings=tmp_path / "project" / ".unfence" / "settings.local.yaml",
    )


@pytest.fixture
def app_settings(settings_paths):
    return AppSettings(paths=settings_paths)


@pytest.fixture
def multi_file_reply():
    """A typical assistant reply mixing several path conventions."""
    return f"""Here is the project.

```text
my-app/
├── src/
│   ├── index.ts
│   └── utils/helper.ts
└── package.json
```

### 1. Entry point (`src/index.ts`)

{FENCE}typescript
import {{ helper }} from "./utils/helper";
helper();
{FENCE}

{FENCE}typescript:src/utils/helper.ts
export function helper() {{}}
{FENCE}

Create a file named **package.json**:

{FENCE}json
{{"name": "my-app"}}
{FENCE}

Then install:

{FENCE}bash
npm install
{FENCE}
"""
