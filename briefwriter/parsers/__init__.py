from briefwriter.parsers.brief_parser import BriefParser

__all__ = ['BriefParser']
