"""ストリーミングアップローダー"""
import os
from typing import Any, BinaryIO, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from ..models.config import TransferOptions
from ..utils.logger import LoggerManager


class StreamingUploader:
    """boto3クライアントでオブジェクト本体をストリーム送信する"""

    def __init__(self, s3_client, options: Optional[TransferOptions] = None):
        self.s3_client = s3_client
        self.options = options or TransferOptions()
        self.logger = LoggerManager.get_logger()

    def upload(self, bucket: str, key: str, body: BinaryIO, content_type: str) -> Optional[str]:
        """本体を送信してETagを返す（バックエンドが返さなければ None）"""
        extra_args = {"ContentType": content_type} if content_type else {}

        if self._remaining_size(body) < self.options.multipart_threshold:
            response = self.s3_client.put_object(
                Bucket=bucket, Key=key, Body=body, **extra_args
            )
            return response.get("ETag")

        return self._upload_multipart(bucket, key, body, extra_args)

    def _upload_multipart(self, bucket: str, key: str, body: BinaryIO,
                          extra_args: Dict[str, Any]) -> Optional[str]:
        """パートを1つずつ送信し、完了時のETagを返す"""
        upload_id = self.s3_client.create_multipart_upload(
            Bucket=bucket, Key=key, **extra_args
        )["UploadId"]

        parts: List[Dict[str, Any]] = []
        try:
            while True:
                chunk = body.read(self.options.multipart_chunksize)
                if not chunk:
                    break
                part_number = len(parts) + 1
                response = self.s3_client.upload_part(
                    Bucket=bucket, Key=key, UploadId=upload_id,
                    PartNumber=part_number, Body=chunk,
                )
                parts.append({"ETag": response["ETag"], "PartNumber": part_number})

            response = self.s3_client.complete_multipart_upload(
                Bucket=bucket, Key=key, UploadId=upload_id,
                MultipartUpload={"Parts": parts},
            )
        except Exception:
            self._abort(bucket, key, upload_id)
            raise

        return response.get("ETag")

    def _abort(self, bucket: str, key: str, upload_id: str) -> None:
        try:
            self.s3_client.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)
        except (ClientError, BotoCoreError) as e:
            # 元のエラーを優先する
            self.logger.warning(f"Failed to abort multipart upload {upload_id} for {key}: {e}")

    @staticmethod
    def _remaining_size(body: BinaryIO) -> int:
        position = body.tell()
        end = body.seek(0, os.SEEK_END)
        body.seek(position)
        return end - position
