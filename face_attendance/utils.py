import os
import logging
import datetime
import cv2

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Configure logging
def setup_logger(log_dir='logs', debug=False):
    """Set up and configure logger for the application."""
    ensure_directory(log_dir)

    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f'face_attendance_{timestamp}.log')
    level = logging.DEBUG if debug else logging.INFO

    # Configure logger
    logger = logging.getLogger('face_attendance')
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # File handler
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    # Format
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    # Add handlers
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger

# Create directories if they don't exist
def ensure_directory(directory):
    """Ensure directory exists, create if it doesn't."""
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
        logging.getLogger(__name__).info(f"Created directory: {directory}")

def current_timestamp(now=None):
    """Format a local time as YYYY-MM-DD HH:MM:SS."""
    if now is None:
        now = datetime.datetime.now()
    return now.strftime(TIMESTAMP_FORMAT)

def to_grayscale(image):
    """Convert a BGR frame to single-channel grayscale, leaving gray input untouched."""
    if image is None:
        return None

    if len(image.shape) == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image
