from .transcoding_worker import TranscodingWorker, build_job_processor

__all__ = ["TranscodingWorker", "build_job_processor"]
