#!/usr/bin/env python3
"""
EditorSession Example: editing post content in memory

This example starts an editing session from persisted content, applies a few
user edits, pushes an external update, and reads the final content the way a
form does at submit time.
"""

import json

from quill_loro.cms.posts import PostForm, build_post_payload, load_post_content
from quill_loro.model.editor_session import EditorSession

STORED_CONTENT = json.dumps([
    {"type": "heading", "level": 1, "children": [{"type": "text", "text": "Release notes"}]},
    {"type": "paragraph", "children": [{"type": "text", "text": "Version 1.0 is out."}]},
])


def main():
    print("EditorSession Example")
    print("=" * 50)

    def on_change(document):
        print(f"   change: {len(document)} blocks")

    print("1. Loading stored content...")
    session = EditorSession(on_content_change=on_change, session_id="example")
    session.start(load_post_content(STORED_CONTENT))
    print(f"   {session.get_html()}")

    print("\n2. Typing...")
    length = len("Release notes") + 1 + len("Version 1.0 is out.")
    session.edit([{"retain": length}, {"insert": " Enjoy!"}])
    session.edit([{"retain": length + 1}, {"retain": 6, "attributes": {"bold": True}}])
    print(f"   {session.get_html()}")

    print("\n3. Host pushes the same content back (no change reported)...")
    session.set_content(session.get_content())

    print("\n4. Submitting...")
    payload = build_post_payload(
        PostForm(title="Release notes", description="What changed"),
        session.get_content(),
    )
    print(json.dumps(payload, indent=2))

    session.destroy()


if __name__ == "__main__":
    main()
