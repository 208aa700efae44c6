from dbdm.core.where_compiler import WhereClause, compile_where, parse_condition

__all__ = ["WhereClause", "compile_where", "parse_condition"]
