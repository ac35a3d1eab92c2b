"""
Saints Console
==============

Interactive terminal front end for the saints lookup.

Usage:
    python scripts/saints_console.py [--lang es]

Commands:
    - Type part of a name to see suggestions (3+ characters)
    - Type '!<name>' or '!<number>' to open a saint (number = suggestion index)
    - Type 'q' or 'quit' to exit
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from services import saints
from services.model_client import ModelServiceError
from utils.suggestions import SuggestionDebouncer


def print_header():
    print("\n" + "=" * 60)
    print("  SAINTS CONSOLE")
    print("=" * 60)
    print("\nCommands:")
    print("  <text>       - Suggest saints matching the text")
    print("  !<name>      - Show a saint's details")
    print("  !<number>    - Show the numbered suggestion")
    print("  q / quit     - Exit")
    print("\nFeatured: " + ", ".join(saints.FEATURED_SAINTS))
    print("=" * 60 + "\n")


def render(debouncer: SuggestionDebouncer):
    if debouncer.loading:
        print("  ... looking up suggestions")
        return
    if debouncer.suggestions:
        for i, name in enumerate(debouncer.suggestions, 1):
            print(f"  {i}. {name}")


def print_saint(info):
    print("\n" + "-" * 60)
    print(f"{info.name}  (feast: {info.feast_day})")
    print("-" * 60)
    print(info.summary)
    if info.patronage:
        print("\nPatron of: " + ", ".join(info.patronage))
    print("\n" + info.biography)
    for quote in info.quotes:
        print(f'\n  "{quote}"')
    print()


async def show_saint(name, language):
    try:
        info = await asyncio.to_thread(saints.get_saint_info, name, language)
    except ModelServiceError as e:
        print(f"\n  {e.message}\n")
        return
    print_saint(info)


async def main(language):
    async def fetch(text):
        return await asyncio.to_thread(saints.get_saint_suggestions, text, language)

    debouncer = SuggestionDebouncer(fetch, on_change=render)
    print_header()

    try:
        while True:
            line = await asyncio.to_thread(input, "saint> ")
            line = line.strip()

            if line.lower() in ('q', 'quit'):
                break

            if line.startswith('!'):
                target = line[1:].strip()
                if target.isdigit() and 1 <= int(target) <= len(debouncer.suggestions):
                    target = debouncer.suggestions[int(target) - 1]
                if target:
                    debouncer.close()
                    await show_saint(target, language)
                continue

            debouncer.update(line)
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        debouncer.close()
        await debouncer.settle()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Look up Catholic saints from the terminal.")
    parser.add_argument('--lang', default='en', choices=['en', 'es'])
    parser.add_argument('--verbose', action='store_true', help="show service logs")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    asyncio.run(main(args.lang))
