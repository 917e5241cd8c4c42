"""Entry point for running Cinestream via `python -m cinestream`."""

from cinestream import CinestreamService
from cinestream.core.settings import get_cinestream_config


def main() -> None:
    config = get_cinestream_config()
    url = config.CINESTREAM.URL

    print(f"Starting Cinestream service at {url}...")
    print("Press Ctrl+C to stop.")

    CinestreamService.launch(url=url)


if __name__ == "__main__":
    main()
