from dotenv import load_dotenv

from tests.test_fixtures import (  # noqa: F401
    make_image,
    scan_root,
    single_worker_config,
)

# Ensure environment variables from .env are available during test collection
load_dotenv()
