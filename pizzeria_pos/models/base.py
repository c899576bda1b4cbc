"""
基础数据模型
定义通用的模型基类
"""

from pydantic import BaseModel


class BaseEntity(BaseModel):
    """基础实体模型"""
    
    model_config = {"from_attributes": True}


class FrozenEntity(BaseModel):
    """只读实体，目录快照在一次计价过程中不可修改"""
    
    model_config = {"from_attributes": True, "frozen": True}
