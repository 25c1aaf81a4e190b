# filerepo/extensions.py
from flask_cors import CORS

from .runner import LoopRunner
from .storage.registry import CollectionRegistry

cors = CORS()

# Bound to DATA_DIR and the storage options by create_app() via init_app()
registry = CollectionRegistry()

# Single event loop shared by all requests; collection locks live on it
runner = LoopRunner()
