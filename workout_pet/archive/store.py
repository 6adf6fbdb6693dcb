"""宠物存档与最长寿记录的本地存储（JSON 文件）。"""
import json
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from workout_pet.config import ARCHIVE_DIR, PETS_DIR, ensure_dirs
from workout_pet.pet.models import LongestLivedRecord, Pet


class PetStore:
    """宠物存档：每只宠物一个 JSON 文件，index.json 记录全部 ID。"""
    _index_file = "index.json"

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir or PETS_DIR
        ensure_dirs()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _index_path(self) -> Path:
        return self.base_dir / self._index_file

    def _pet_path(self, pet_id: str) -> Path:
        return self.base_dir / f"{pet_id}.json"

    def list_ids(self) -> List[str]:
        """列出所有宠物 ID（按创建顺序）。"""
        if not self._index_path().exists():
            return []
        with open(self._index_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
        return data.get("ids", [])

    def _save_index(self, ids: List[str]) -> None:
        with open(self._index_path(), "w", encoding="utf-8") as f:
            json.dump({"ids": ids}, f, indent=2, ensure_ascii=False)

    def load(self, pet_id: str) -> Optional[Pet]:
        """加载一只宠物；文件不存在或已损坏返回 None。"""
        path = self._pet_path(pet_id)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Pet.model_validate(json.load(f))
        except (ValueError, ValidationError) as e:
            print(f"[宠物-存档] 读取 {path.name} 失败: {e}", file=sys.stderr, flush=True)
            return None

    def save(self, pet: Pet) -> None:
        """保存宠物并更新索引。写盘失败抛 OSError，由调用方决定如何处理。"""
        path = self._pet_path(pet.id)
        with open(path, "w", encoding="utf-8") as f:
            f.write(pet.model_dump_json(indent=2))

        ids = self.list_ids()
        if pet.id not in ids:
            ids.append(pet.id)
            self._save_index(ids)

    def delete(self, pet_id: str) -> bool:
        """删除存档。"""
        path = self._pet_path(pet_id)
        if not path.exists():
            return False
        path.unlink()
        ids = self.list_ids()
        if pet_id in ids:
            ids.remove(pet_id)
            self._save_index(ids)
        return True

    def list_all(self) -> List[Pet]:
        out = []
        for pet_id in self.list_ids():
            p = self.load(pet_id)
            if p:
                out.append(p)
        return out

    def list_active(self) -> List[Pet]:
        """列出仍在养育中的宠物（活着且为当前宠物）。"""
        return [p for p in self.list_all() if p.is_active and not p.is_dead]


class RecordStore:
    """最长寿宠物记录：单个 JSON 文件，最多一条。"""
    _record_file = "longest_lived.json"

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = base_dir or ARCHIVE_DIR
        ensure_dirs()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self) -> Path:
        return self.base_dir / self._record_file

    def load(self) -> Optional[LongestLivedRecord]:
        path = self._path()
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return LongestLivedRecord.model_validate(json.load(f))
        except (ValueError, ValidationError) as e:
            print(f"[宠物-记录] 读取最长寿记录失败: {e}", file=sys.stderr, flush=True)
            return None

    def save(self, record: LongestLivedRecord) -> None:
        """写入记录（覆盖旧记录）。"""
        with open(self._path(), "w", encoding="utf-8") as f:
            f.write(record.model_dump_json(indent=2))

    def delete(self) -> bool:
        path = self._path()
        if not path.exists():
            return False
        path.unlink()
        return True
