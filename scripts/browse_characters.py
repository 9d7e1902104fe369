#!/usr/bin/env python3
"""角色浏览脚本。

通过 FeedController 驱动远端角色集合，可用于人工验证接口与分页行为。

使用方式：
    # 浏览前两页
    python scripts/browse_characters.py --pages 2

    # 按名称搜索
    python scripts/browse_characters.py --search "Mickey"

    # 查看单个角色详情
    python scripts/browse_characters.py --id 308

    # JSON 输出
    python scripts/browse_characters.py --pages 1 --json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from charfeed.core.config import settings  # noqa: E402
from charfeed.core.domain.exceptions import DomainException  # noqa: E402
from charfeed.core.infrastructure.logging import setup_logging  # noqa: E402
from charfeed.modules.characters.domain.entities import Character  # noqa: E402
from charfeed.modules.feed.application.dependencies import (  # noqa: E402
    create_detail_service,
    create_feed_controller,
    get_character_client,
)
from charfeed.modules.feed.domain.events import ErrorOccurredEvent  # noqa: E402


def _character_row(character: Character) -> dict:
    return {
        "id": character.id,
        "name": character.name,
        "primary_category": character.primary_category,
        "appearances": character.total_appearances,
        "image_url": character.image_url,
    }


async def browse(pages: int, page_size: int, search: str | None) -> dict:
    errors: list[str] = []
    async with get_character_client() as client:
        controller = create_feed_controller(source=client, page_size=page_size)
        controller.events.subscribe(
            ErrorOccurredEvent, lambda event: errors.append(f"{event.kind}: {event.message}")
        )

        if search is not None:
            await controller.search(search)
        else:
            await controller.load_first_page()
            while not errors and controller.has_more_pages and controller.current_page < pages:
                await controller.load_next_page()

        result = {
            "mode": controller.mode.value,
            "current_page": controller.current_page,
            "total_pages": controller.total_pages,
            "has_more_pages": controller.has_more_pages,
            "count": controller.item_count,
            "items": [_character_row(c) for c in controller.items],
            "errors": errors,
        }
        controller.close()
        return result


async def show_detail(character_id: int) -> dict:
    async with get_character_client() as client:
        detail = await create_detail_service(client).load(character_id)
    character = detail.character
    return {
        **_character_row(character),
        "url": character.url,
        "sections": [
            {"title": s.title, "count": s.count, "items": list(s.items)}
            for s in detail.sections
        ],
    }


def print_text(result: dict) -> None:
    if "sections" in result:
        print(f"#{result['id']} {result['name']} ({result['primary_category']})")
        for section in result["sections"]:
            print(f"  {section['title']}: {section['count']}")
        return

    print(
        f"mode={result['mode']} page={result['current_page']}/{result['total_pages']} "
        f"items={result['count']} more={result['has_more_pages']}"
    )
    for row in result["items"]:
        print(
            f"  #{row['id']:<6} {row['name']:<40} "
            f"{row['primary_category']:<12} {row['appearances']} appearances"
        )
    for error in result["errors"]:
        print(f"  ! {error}")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Browse the remote character feed")
    parser.add_argument("--pages", type=int, default=1, help="Number of pages to load")
    parser.add_argument(
        "--page-size", type=int, default=settings.DEFAULT_PAGE_SIZE, help="Page size"
    )
    parser.add_argument("--search", help="Search characters by name")
    parser.add_argument("--id", type=int, dest="character_id", help="Show one character")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--log-level", default="WARNING", help="Log level")

    args = parser.parse_args()
    setup_logging(args.log_level)

    try:
        if args.character_id is not None:
            result = await show_detail(args.character_id)
        else:
            result = await browse(args.pages, args.page_size, args.search)
    except DomainException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_text(result)

    return 1 if result.get("errors") else 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
