from cv_catalog.models.cv import Cv, User, CvRecord, UserRecord, FileType, MUTABLE_FIELDS

__all__ = ["Cv", "User", "CvRecord", "UserRecord", "FileType", "MUTABLE_FIELDS"]
