from .store_group import StoreGroupJob, group_attributes_from_info

__all__ = ["StoreGroupJob", "group_attributes_from_info"]
