"""Simple entrypoint to generate an outfit from a small demo wardrobe."""

from stylist_app.app import StylistApp

DEMO_USER = "demo-user"
DEMO_ITEMS = [
    {"item_id": "demo-top", "category": "shirt", "color": "Navy Blue", "style": "casual", "gender": "Male"},
    {"item_id": "demo-bottom", "category": "jeans", "color": "Blue", "style": "casual", "gender": "Male"},
    {"item_id": "demo-shoes", "category": "sneakers", "color": "White", "style": "casual"},
    {"item_id": "demo-watch", "category": "watch", "color": "Black", "style": "classic"},
]


def main() -> None:
    app = StylistApp()
    if not app.list_items(DEMO_USER):
        for item in DEMO_ITEMS:
            app.add_item(DEMO_USER, **item)

    session = app.start_session(DEMO_USER, "Male")
    result = app.generate_outfit(DEMO_USER, session.session_id)
    if result.outfit is None:
        print(f"No outfit generated: {result.status}")
        return
    print(result.outfit.style_notes)
    print(result.analysis)


if __name__ == "__main__":
    main()
