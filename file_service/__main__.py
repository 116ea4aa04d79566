from file_service.app import create_app
from file_service.config import load_config
from file_service.log import setup_logging


def main() -> None:
    config = load_config()
    setup_logging(config.log_level, config.log_file)
    app = create_app(config)
    app.run(host=config.host, port=config.port, threaded=True)


if __name__ == "__main__":
    main()
