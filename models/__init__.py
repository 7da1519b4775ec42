from models.base import Base
from models.content_type_migration import ContentTypeMigration
