"""Enable running claude-statusline as a module: python -m claude_statusline."""

from claude_statusline.cli import main

if __name__ == "__main__":
    main()
