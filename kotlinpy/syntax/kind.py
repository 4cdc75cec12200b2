"""Unified syntax kinds for parser and CST."""

from enum import IntEnum

from kotlinpy.lexer import TokenKind


class KotlinSyntaxKind(IntEnum):
    """Language syntax vocabulary (tokens + nodes).

    Token members share names and values with `TokenKind`.
    """

    TOMBSTONE = 0
    EOF = 1
    BAD_CHARACTER = 2

    # Trivia tokens
    WHITESPACE = 10
    NEWLINE = 11
    LINE_COMMENT = 12
    BLOCK_COMMENT = 13
    BYTE_ORDER_MARK = 14

    # Lexical tokens
    IDENTIFIER = 20
    INTEGER_LITERAL = 21
    FLOAT_LITERAL = 22
    CHARACTER_LITERAL = 23
    STRING_LITERAL = 24

    PLUS = 30
    MINUS = 31
    MUL = 32
    DIV = 33
    PERC = 34
    PLUSPLUS = 35
    MINUSMINUS = 36
    EQ = 37
    PLUSEQ = 38
    MINUSEQ = 39
    MULTEQ = 40
    DIVEQ = 41
    PERCEQ = 42
    EQEQ = 43
    EXCLEQ = 44
    EQEQEQ = 45
    EXCLEQEQEQ = 46
    LT = 47
    GT = 48
    LTEQ = 49
    GTEQ = 50
    ANDAND = 51
    OROR = 52
    EXCL = 53
    EXCLEXCL = 54
    NOT_IN = 55
    NOT_IS = 56
    AS_SAFE = 57
    QUEST = 58
    ELVIS = 59
    SAFE_ACCESS = 60
    DOT = 61
    RANGE = 62
    RANGE_UNTIL = 63
    COLON = 64
    COLONCOLON = 65
    ARROW = 66
    AT = 67

    SEMICOLON = 70
    COMMA = 71
    LPAR = 72
    RPAR = 73
    LBRACE = 74
    RBRACE = 75
    LBRACKET = 76
    RBRACKET = 77

    PACKAGE_KEYWORD = 100
    IMPORT_KEYWORD = 101
    CLASS_KEYWORD = 102
    INTERFACE_KEYWORD = 103
    FUN_KEYWORD = 104
    VAL_KEYWORD = 105
    VAR_KEYWORD = 106
    IF_KEYWORD = 107
    ELSE_KEYWORD = 108
    WHILE_KEYWORD = 109
    DO_KEYWORD = 110
    FOR_KEYWORD = 111
    WHEN_KEYWORD = 112
    RETURN_KEYWORD = 113
    BREAK_KEYWORD = 114
    CONTINUE_KEYWORD = 115
    THROW_KEYWORD = 116
    TRY_KEYWORD = 117
    CATCH_KEYWORD = 118
    FINALLY_KEYWORD = 119
    IS_KEYWORD = 120
    IN_KEYWORD = 121
    AS_KEYWORD = 122
    NULL_KEYWORD = 123
    TRUE_KEYWORD = 124
    FALSE_KEYWORD = 125
    THIS_KEYWORD = 126
    SUPER_KEYWORD = 127
    OBJECT_KEYWORD = 128
    TYPEALIAS_KEYWORD = 129

    # Node kinds
    FILE = 1000
    ERROR = 1001

    # Header
    PACKAGE_DIRECTIVE = 1010
    IMPORT_LIST = 1011
    IMPORT_DIRECTIVE = 1012
    IMPORT_ALIAS = 1013

    # Declarations
    MODIFIER_LIST = 1020
    ANNOTATION_ENTRY = 1021
    CLASS = 1022
    OBJECT_DECLARATION = 1023
    CLASS_BODY = 1024
    PRIMARY_CONSTRUCTOR = 1025
    SUPER_TYPE_LIST = 1026
    SUPER_TYPE_ENTRY = 1027
    SUPER_TYPE_CALL_ENTRY = 1028
    FUN = 1029
    VALUE_PARAMETER_LIST = 1030
    VALUE_PARAMETER = 1031
    TYPE_PARAMETER_LIST = 1032
    TYPE_PARAMETER = 1033
    PROPERTY = 1034
    PROPERTY_DELEGATE = 1035
    DESTRUCTURING_DECLARATION = 1036
    DESTRUCTURING_DECLARATION_ENTRY = 1037
    TYPEALIAS = 1038
    CLASS_INITIALIZER = 1039
    PROPERTY_ACCESSOR = 1040
    SECONDARY_CONSTRUCTOR = 1041
    ENUM_ENTRY = 1042

    # Types
    USER_TYPE = 1050
    NULLABLE_TYPE = 1051
    FUNCTION_TYPE = 1052
    TYPE_ARGUMENT_LIST = 1053
    TYPE_PROJECTION = 1054

    # Statements / control flow
    BLOCK = 1060
    IF = 1061
    WHEN = 1062
    WHEN_ENTRY = 1063
    WHEN_CONDITION_EXPRESSION = 1064
    WHEN_CONDITION_IN_RANGE = 1065
    WHEN_CONDITION_IS_PATTERN = 1066
    FOR = 1067
    WHILE = 1068
    DO_WHILE = 1069
    TRY = 1070
    CATCH = 1071
    FINALLY = 1072
    RETURN = 1073
    BREAK = 1074
    CONTINUE = 1075
    THROW = 1076
    LABEL_QUALIFIER = 1077

    # Expressions
    BINARY_EXPRESSION = 1080
    OPERATION_REFERENCE = 1081
    PREFIX_EXPRESSION = 1082
    POSTFIX_EXPRESSION = 1083
    IS_EXPRESSION = 1084
    BINARY_WITH_TYPE = 1085
    PARENTHESIZED = 1086
    CALL_EXPRESSION = 1087
    VALUE_ARGUMENT_LIST = 1088
    VALUE_ARGUMENT = 1089
    LAMBDA_ARGUMENT = 1090
    DOT_QUALIFIED_EXPRESSION = 1091
    SAFE_ACCESS_EXPRESSION = 1092
    ARRAY_ACCESS_EXPRESSION = 1093
    INDICES = 1094
    REFERENCE_EXPRESSION = 1095
    THIS_EXPRESSION = 1096
    SUPER_EXPRESSION = 1097
    INTEGER_CONSTANT = 1098
    FLOAT_CONSTANT = 1099
    CHARACTER_CONSTANT = 1100
    BOOLEAN_CONSTANT = 1101
    NULL = 1102
    STRING_TEMPLATE = 1103
    LAMBDA_EXPRESSION = 1104
    FUNCTION_LITERAL = 1105
    OBJECT_LITERAL = 1106
    CALLABLE_REFERENCE_EXPRESSION = 1107

    @property
    def is_trivia(self) -> bool:
        return self in (
            KotlinSyntaxKind.WHITESPACE,
            KotlinSyntaxKind.NEWLINE,
            KotlinSyntaxKind.LINE_COMMENT,
            KotlinSyntaxKind.BLOCK_COMMENT,
            KotlinSyntaxKind.BYTE_ORDER_MARK,
        )

    @property
    def is_comment(self) -> bool:
        return self in (KotlinSyntaxKind.LINE_COMMENT, KotlinSyntaxKind.BLOCK_COMMENT)

    @property
    def is_token(self) -> bool:
        return 0 < self.value < 1000

    @property
    def is_node(self) -> bool:
        return self.value >= 1000

    @staticmethod
    def from_token_kind(kind: TokenKind) -> "KotlinSyntaxKind":
        return KotlinSyntaxKind[kind.name]
