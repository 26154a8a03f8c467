# lms_media: direct-to-store multipart uploads for the LMS backend
