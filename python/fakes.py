"""テスト用のストレージダブル"""
from typing import Any, Dict, List, Optional, Sequence, Set

from botocore.exceptions import ClientError


def client_error(code: str, status: int = 400, operation: str = "HeadObject") -> ClientError:
    """botocore の ClientError を作成"""
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def page(keys: Sequence[str], next_token: Optional[str] = None) -> Dict[str, Any]:
    """list_objects_v2 の1ページ分のレスポンス"""
    response: Dict[str, Any] = {"KeyCount": len(keys)}
    if keys:
        response["Contents"] = [{"Key": key, "Size": 1} for key in keys]
    if next_token:
        response["IsTruncated"] = True
        response["NextContinuationToken"] = next_token
    return response


class FakeObjectClient:
    """呼び出しを記録し、スクリプトされたページを順に返す"""

    def __init__(self, pages: Optional[List[Dict[str, Any]]] = None,
                 head_error: Optional[Exception] = None,
                 list_error: Optional[Exception] = None,
                 delete_error: Optional[Exception] = None,
                 fail_delete_on_call: int = 1):
        self.pages = list(pages or [])
        self.head_error = head_error
        self.list_error = list_error
        self.delete_error = delete_error
        self.fail_delete_on_call = fail_delete_on_call
        self.head_calls: List[str] = []
        self.list_calls: List[Dict[str, Any]] = []
        self.delete_calls: List[Dict[str, Any]] = []

    def head_object(self, **kwargs):
        self.head_calls.append(kwargs["Key"])
        if self.head_error is not None:
            raise self.head_error
        return {"ContentLength": 5, "ETag": '"existing"'}

    def list_objects_v2(self, **kwargs):
        self.list_calls.append(kwargs)
        if self.list_error is not None:
            raise self.list_error
        if not self.pages:
            return {"KeyCount": 0}
        return self.pages.pop(0)

    def delete_objects(self, **kwargs):
        self.delete_calls.append(kwargs)
        if self.delete_error is not None and len(self.delete_calls) >= self.fail_delete_on_call:
            raise self.delete_error
        return {}

    @property
    def deleted_keys(self) -> List[str]:
        return [
            obj["Key"]
            for call in self.delete_calls
            for obj in call["Delete"]["Objects"]
        ]


class RecordingUploader:
    """送信された本体を記録する PutUploader"""

    def __init__(self, fail_keys: Optional[Set[str]] = None, etag: Optional[str] = '"etag"'):
        self.fail_keys = fail_keys or set()
        self.etag = etag
        self.uploads: List[Dict[str, Any]] = []

    def upload(self, bucket, key, body, content_type):
        self.uploads.append({
            "bucket": bucket,
            "key": key,
            "body": body.read(),
            "content_type": content_type,
        })
        if key in self.fail_keys:
            raise client_error("InternalError", 500, "PutObject")
        return self.etag

    @property
    def keys(self) -> List[str]:
        return [upload["key"] for upload in self.uploads]
