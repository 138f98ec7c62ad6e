from __future__ import annotations

import argparse
from pathlib import Path

from adapters.filesystem.content_store import FileSystemContentState
from adapters.memory.repositories import build_repositories
from domain.models import LayoutNode, Page, Site
from domain.services.manage_layouts import LayoutManager

DEMO_SITE_ID = "demo"


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a content store with a demo layout tree.")
    parser.add_argument("--store", default="data/cms/store.json")
    args = parser.parse_args()

    store_path = Path(args.store)
    repos = build_repositories(FileSystemContentState(store_path))
    if repos.sites.get(DEMO_SITE_ID) is not None:
        raise SystemExit(f"Demo site already present in {store_path}")

    manager = LayoutManager(repos.layouts, repos.pages, repos.sites)
    repos.sites.save(Site(id=DEMO_SITE_ID, identifier="demo", label="Demo"))
    base = manager.save(
        LayoutNode(
            site_id=DEMO_SITE_ID,
            identifier="base",
            content="<body><header>Demo</header>{{ cms:page:content }}</body>",
            head="<title>{{ cms:page:title }}</title>",
            css="body { font-family: sans-serif; }",
        )
    )
    article = manager.save(
        LayoutNode(
            site_id=DEMO_SITE_ID,
            identifier="article",
            parent_id=base.id,
            content="<article>{{ cms:page:content:rich_text }}</article>",
            head='<meta name="type" content="article">',
        )
    )
    repos.pages.save(
        Page(
            id="welcome",
            site_id=DEMO_SITE_ID,
            label="Welcome",
            layout_id=article.id,
            blocks={"title": "Welcome", "content": "<p>Hello from the demo page.</p>"},
        )
    )
    print(f"Seeded site {DEMO_SITE_ID!r} with layouts base/article into {store_path}")


if __name__ == "__main__":
    main()
