"""S3互換ストレージに対するクリーンアップとアップロード"""
from typing import Any, BinaryIO, Dict, List, Optional, Protocol, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import (
    CleanupError,
    InvalidInputError,
    ObjectExistsError,
    SyncIOError,
)
from ..models.plan import FilePlan, UploadResult
from ..utils.content_type import detect_content_type
from ..utils.file_utils import normalize_prefix
from ..utils.logger import LoggerManager
from .cancellation import CancelToken, check, guard_stream

NOT_FOUND_CODES = {"notfound", "nosuchkey", "404", "no such key"}


class ObjectClient(Protocol):
    """Transportが使うS3 APIのサブセット（boto3のS3クライアントがそのまま満たす）"""

    def head_object(self, **kwargs: Any) -> Dict[str, Any]: ...

    def list_objects_v2(self, **kwargs: Any) -> Dict[str, Any]: ...

    def delete_objects(self, **kwargs: Any) -> Dict[str, Any]: ...


class PutUploader(Protocol):
    """オブジェクト本体のストリーム送信"""

    def upload(self, bucket: str, key: str, body: BinaryIO,
               content_type: str) -> Optional[str]: ...


def is_not_found(error: BaseException) -> bool:
    """存在確認の応答が「キーなし」かどうか"""
    if not isinstance(error, ClientError):
        return False

    code = str(error.response.get("Error", {}).get("Code", "")).strip().lower()
    if code in NOT_FOUND_CODES:
        return True

    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return status == 404


class Transport:
    """クリーンアップとアップロードをまとめて扱う"""

    def __init__(self, client: ObjectClient, uploader: PutUploader,
                 bucket: str, overwrite: bool):
        self.client = client
        self.uploader = uploader
        self.bucket = bucket
        self.overwrite = overwrite
        self.logger = LoggerManager.get_logger()

    def ensure_absent(self, key: str, token: Optional[CancelToken] = None) -> None:
        """キーが未使用であることを確認"""
        check(token, f"existence check for {key}")
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            if is_not_found(e):
                return
            raise SyncIOError(
                f"failed to check if {key} exists: {e}", {"key": key}
            ) from e

        raise ObjectExistsError(key)

    def cleanup(self, prefix: Optional[str], token: Optional[CancelToken] = None) -> int:
        """プレフィックス配下のオブジェクトを削除して件数を返す

        空のプレフィックスはバケット全体が対象。失敗時は CleanupError.removed に
        それまでの削除件数が入る。
        """
        resolved = normalize_prefix(prefix)
        if resolved:
            resolved += "/"

        total = 0
        continuation_token: Optional[str] = None

        while True:
            params: Dict[str, Any] = {"Bucket": self.bucket}
            if resolved:
                params["Prefix"] = resolved
            if continuation_token:
                params["ContinuationToken"] = continuation_token

            check(token, "cleanup listing")
            try:
                response = self.client.list_objects_v2(**params)
            except (ClientError, BotoCoreError) as e:
                raise CleanupError(
                    f"failed to list objects for cleanup: {e}", total, {"prefix": resolved}
                ) from e

            keys = [obj["Key"] for obj in response.get("Contents") or []]
            continuation_token = response.get("NextContinuationToken")

            if keys:
                check(token, "cleanup deletion")
                try:
                    self.client.delete_objects(
                        Bucket=self.bucket,
                        Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
                    )
                except (ClientError, BotoCoreError) as e:
                    raise CleanupError(
                        f"failed to delete objects: {e}", total, {"prefix": resolved}
                    ) from e

                total += len(keys)
                self.logger.debug(f"Deleted {len(keys)} objects under '{resolved}'")

            if not continuation_token:
                return total

    def upload(self, plans: Sequence[FilePlan],
               token: Optional[CancelToken] = None) -> List[UploadResult]:
        """計画を順番にアップロード（最初の失敗で中断し、結果は返さない）"""
        if not plans:
            raise InvalidInputError("no files provided for upload")

        results: List[UploadResult] = []
        for plan in plans:
            results.append(self._upload_one(plan, token))
        return results

    def _upload_one(self, plan: FilePlan, token: Optional[CancelToken]) -> UploadResult:
        if not self.overwrite:
            self.ensure_absent(plan.key, token)

        try:
            file = open(plan.source, "rb")
        except OSError as e:
            raise SyncIOError(
                f"failed to open {plan.source}: {e}", {"path": plan.source}
            ) from e

        with file:
            content_type = detect_content_type(plan.source, file)
            try:
                file.seek(0)
            except OSError as e:
                raise SyncIOError(
                    f"failed to rewind {plan.source}: {e}", {"path": plan.source}
                ) from e

            operation = f"upload of {plan.source}"
            check(token, operation)
            body = guard_stream(file, token, operation)
            try:
                etag = self.uploader.upload(self.bucket, plan.key, body, content_type)
            except (ClientError, BotoCoreError, OSError) as e:
                self.logger.error(f"Upload failed: {plan.source} -> {self.bucket}/{plan.key}")
                raise SyncIOError(
                    f"failed to upload {plan.source} to {plan.key}: {e}",
                    {"path": plan.source, "key": plan.key},
                ) from e

        self.logger.debug(f"Uploaded {plan.source} to {self.bucket}/{plan.key}")
        return UploadResult.from_plan(plan, etag)
