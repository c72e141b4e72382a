from typing import Dict, Optional, Type

from gdrom.ifilter import IFilter, DirectoryFilter, ZipFileFilter


class PluginRegister:
    _instance = None

    def __init__(self):
        self.filters: Dict[str, Type[IFilter]] = {}

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            cls._instance = cls()
            cls._instance.register_filter("Directory", DirectoryFilter)
            cls._instance.register_filter("Zip", ZipFileFilter)
        return cls._instance

    def register_filter(self, name: str, filter_class: Type[IFilter]):
        self.filters[name.lower()] = filter_class

    def get_filter(self, path: str) -> Optional[IFilter]:
        '''
        returns an unopened filter for the first registered type that
        recognises the path
        '''
        for filter_class in self.filters.values():
            filter_instance = filter_class(path)
            if filter_instance.identify(path):
                return filter_instance
        return None
