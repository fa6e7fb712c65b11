"""Main CLI entry point"""

from zg.cli.search import search_command


def main():
    """Entry point for the CLI"""
    search_command(prog_name='zg')


if __name__ == '__main__':
    main()
