"""Local disk storage for application documents, one folder per application."""
import logging
import os
import shutil
from datetime import datetime

from werkzeug.utils import secure_filename

from ..errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'pdf', 'doc', 'docx', 'jpg', 'jpeg', 'png'}


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


class LocalDocumentStore:
    """Anything with ``save`` and ``delete_application_documents`` can stand in."""

    def __init__(self, root):
        self.root = root

    def folder_for(self, application_id):
        return os.path.join(self.root, str(application_id))

    def save(self, application_id, file):
        if not file or not file.filename or not allowed_file(file.filename):
            raise ValidationError(
                "Document must be one of: " + ", ".join(sorted(ALLOWED_EXTENSIONS))
            )
        folder = self.folder_for(application_id)
        os.makedirs(folder, exist_ok=True)

        filename = secure_filename(file.filename)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        filepath = os.path.join(folder, f"{timestamp}_{filename}")
        file.save(filepath)
        return filepath

    def delete_application_documents(self, application_id):
        folder = self.folder_for(application_id)
        if os.path.isdir(folder):
            shutil.rmtree(folder)
            logger.info("Removed stored documents for application %s", application_id)
