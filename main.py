from wellness_journal import config
from wellness_journal.main import configure_logging, create_app

configure_logging()
app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config.PORT)
