"""Create the document, page, block and access grant tables."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from docengine.infrastructure.database.session import create_tables  # noqa: E402
from docengine.infrastructure.logging import configure_logging, get_logger  # noqa: E402
from docengine.modules.access import models as access_models  # noqa: E402, F401
from docengine.modules.block import models as block_models  # noqa: E402, F401
from docengine.modules.document import models as document_models  # noqa: E402, F401
from docengine.modules.page import models as page_models  # noqa: E402, F401

logger = get_logger(__name__)


async def main() -> None:
    configure_logging()
    logger.info("Creating database tables")

    try:
        await create_tables()
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
