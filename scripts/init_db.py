from keyledger.db.engine import get_engine
from keyledger.db.schema import metadata


def main():
    engine = get_engine()
    metadata.create_all(engine)
    print(f"DB schema created at {engine.url.render_as_string(hide_password=True)}.")


if __name__ == "__main__":
    main()
