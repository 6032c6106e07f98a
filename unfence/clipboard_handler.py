"""Cross-platform clipboard text reader."""

import platform
import subprocess


class ClipboardTextHandler:
    """Read clipboard text across macOS, Linux, and Windows."""

    def __init__(self):
        """Initialize handler with platform detection."""
        self.platform = platform.system()

    def get_platform_commands(self) -> list[list[str]]:
        """Get platform-specific paste commands, tried in order."""
        if self.platform == "Darwin":  # macOS
            return [["pbpaste"]]
        elif self.platform == "Linux":
            # Try xclip first (X11), then xsel, then wl-paste (Wayland)
            return [
                ["xclip", "-selection", "clipboard", "-o"],
                ["xsel", "--clipboard", "--output"],
                ["wl-paste", "--no-newline"],
            ]
        elif self.platform == "Windows":
            return [["powershell", "-NoProfile", "-Command", "Get-Clipboard -Raw"]]
        else:
            return []

    def _run_command(self, command: list[str], timeout: int = 5) -> tuple[bool, str]:
        """Run a paste command and return (success, output)."""
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                timeout=timeout,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
            return result.returncode == 0, result.stdout
        except subprocess.TimeoutExpired:
            return False, "Command timed out"
        except OSError as e:
            return False, str(e)

    def read_clipboard_text(self) -> str | None:
        """
        Read text from the clipboard.

        Returns:
            Clipboard text, or None if no command succeeded or the clipboard is empty
        """
        for command in self.get_platform_commands():
            success, output = self._run_command(command)
            if success and output.strip():
                return output
        return None
