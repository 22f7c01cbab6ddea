"""アップロード計画と結果のデータクラス"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json


@dataclass(frozen=True)
class FilePlan:
    """アップロード予定のローカルファイル"""
    source: str
    key: str
    size: int


@dataclass(frozen=True)
class UploadResult:
    """アップロード済みオブジェクト"""
    source: str
    key: str
    size: int
    etag: Optional[str] = None

    @classmethod
    def from_plan(cls, plan: FilePlan, etag: Optional[str]) -> 'UploadResult':
        return cls(source=plan.source, key=plan.key, size=plan.size, etag=etag)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"source": self.source, "key": self.key, "size": self.size}
        if self.etag:
            data["etag"] = self.etag
        return data


@dataclass
class SyncSummary:
    """1回の実行結果"""
    bucket: str
    region: str = ""
    context_path: str = ""
    cleanup_enabled: bool = False
    objects_removed: int = 0
    objects_uploaded: List[UploadResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"bucket": self.bucket}
        if self.region:
            data["region"] = self.region
        if self.context_path:
            data["context_path"] = self.context_path
        data["cleanup_enabled"] = self.cleanup_enabled
        data["objects_removed"] = self.objects_removed
        data["objects_uploaded"] = [result.to_dict() for result in self.objects_uploaded]
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
