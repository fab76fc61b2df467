import sys
from pathlib import Path

# Support both `python -m file_icons.main` (package context) and `python main.py` (script).
if __package__ in (None, ""):
    pkg_dir = Path(__file__).resolve().parent  # .../src/file_icons
    src_dir = pkg_dir.parent  # .../src
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))
    from file_icons.app import FileIconsApplication
else:
    from .app import FileIconsApplication


def main():
    app = FileIconsApplication(sys.argv)
    return app.run()

if __name__ == "__main__":
    sys.exit(main())
