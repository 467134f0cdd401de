import sys

from loguru import logger

from briefwriter.config.settings import settings


def setup_logger():
	# Remove default handler
	logger.remove()

	# Console handler
	logger.add(
		sys.stderr,
		level=settings.LOG_LEVEL,
		format='<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | '
		'<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
	)

	# File handler
	log_file = settings.BASE_DIR / 'logs' / 'app.log'
	logger.add(
		log_file,
		rotation='500 MB',
		retention='10 days',
		level=settings.LOG_LEVEL,
		format='{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}',
		serialize=False,
	)


# Initialize logger
setup_logger()
