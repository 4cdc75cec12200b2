"""Centralized Kotlin source cases used across lexer/parser/mapper/printer tests."""

from __future__ import annotations

from dataclasses import dataclass
import textwrap


@dataclass(frozen=True, slots=True)
class KotlinCase:
    name: str
    source: str


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


ROUND_TRIP_CASES: tuple[KotlinCase, ...] = (
    KotlinCase(name="empty_file", source=""),
    KotlinCase(name="only_comment", source="// nothing here\n"),
    KotlinCase(
        name="package_and_imports",
        source=_dedent(
            """
            package com.example.app

            import kotlin.math.max
            import java.util.*
            import foo.Bar as Baz
            """
        ),
    ),
    KotlinCase(name="package_with_semicolon", source="package demo;\n\nval a = 1\n"),
    KotlinCase(name="function_with_empty_parameters", source="fun f( ) { }"),
    KotlinCase(
        name="function_with_block_body",
        source=_dedent(
            """
            fun greet(name: String, times: Int = 1): String {
                val greeting = "Hello, ${name}!"
                return greeting
            }
            """
        ),
    ),
    KotlinCase(name="expression_body", source="fun answer()  =   42\n"),
    KotlinCase(
        name="generic_function_with_bound",
        source="fun <T : Comparable<T>> maxOf2(a: T, b: T): T = if (a > b) a else b\n",
    ),
    KotlinCase(
        name="extension_function",
        source='fun String.shout(): String = uppercase() + "!"\n',
    ),
    KotlinCase(
        name="class_with_primary_constructor",
        source=_dedent(
            """
            data class Point(val x: Int, val y: Int) : Comparable<Point> {
                override fun compareTo(other: Point): Int = x - other.x
            }
            """
        ),
    ),
    KotlinCase(
        name="class_with_super_call",
        source=_dedent(
            """
            open class Animal(val name: String)

            class Dog(name: String) : Animal(name), Pet {
                fun bark() = println("woof")
            }
            """
        ),
    ),
    KotlinCase(
        name="interface_and_object",
        source=_dedent(
            """
            interface Shape {
                fun area(): Double
            }

            object Registry {
                val items = mutableListOf<String>()
            }
            """
        ),
    ),
    KotlinCase(
        name="annotations",
        source=_dedent(
            """
            @Suppress("unused")
            private fun helper(vararg values: Int) = values.size
            """
        ),
    ),
    KotlinCase(
        name="nullable_and_casts",
        source=_dedent(
            """
            val name: String? = null
            val length = name?.length ?: 0
            val forced = name!!.length
            val text = value as String
            val maybe = value as? Int
            val check = value is Int && value !is Long
            """
        ),
    ),
    KotlinCase(
        name="operators",
        source=_dedent(
            """
            val sum = a + b * c - d / e % f
            val range = 1..10
            val until = 0..<size
            val flags = 1 shl 2
            val neg = -x
            val not = !done
            val same = a === b || a != c
            """
        ),
    ),
    KotlinCase(
        name="assignments",
        source=_dedent(
            """
            fun update() {
                total += 1
                counts["a"] = 2
                value = total
                i++
                --j
            }
            """
        ),
    ),
    KotlinCase(
        name="control_flow",
        source=_dedent(
            """
            fun loop(items: List<Int>) {
                for (item in items) {
                    if (item > 2) continue else println(item)
                }
                var i = 0
                while (i < 10) i++
                do {
                    i--
                } while (i > 0)
            }
            """
        ),
    ),
    KotlinCase(
        name="when_expression",
        source=_dedent(
            """
            fun describe(x: Any): String = when (x) {
                1, 2 -> "small"
                in 3..10 -> "medium"
                !in 11..20 -> "outside"
                is String -> "text"
                else -> "other"
            }
            """
        ),
    ),
    KotlinCase(
        name="when_without_subject",
        source=_dedent(
            """
            fun classify(n: Int) = when {
                n < 0 -> "negative"
                n == 0 -> "zero"
                else -> {
                    "positive"
                }
            }
            """
        ),
    ),
    KotlinCase(
        name="try_catch_finally",
        source=_dedent(
            """
            fun read() {
                try {
                    risky()
                } catch (e: IllegalStateException) {
                    throw e
                } finally {
                    close()
                }
            }
            """
        ),
    ),
    KotlinCase(
        name="lambdas_and_trailing_lambdas",
        source=_dedent(
            """
            val add = { a: Int, b: Int -> a + b }
            val noArgs = { println("hi") }
            fun main() {
                items.forEach { println(it) }
                run { compute() }
                items.filter { it > 0 }.map { x -> x * 2 }
            }
            """
        ),
    ),
    KotlinCase(
        name="delegated_property",
        source="val lazyValue by lazy { 42 }\n",
    ),
    KotlinCase(
        name="destructuring",
        source="val (first, second) = pair\n",
    ),
    KotlinCase(
        name="named_arguments",
        source='fun call() = connect(host = "localhost", port = 8080)\n',
    ),
    KotlinCase(
        name="comments_everywhere",
        source=_dedent(
            """
            /**
             * Docs.
             */
            fun f(/* none */) { // trailing
                // inside
                val x = 1 /* after */ + 2
            }
            // at the end
            """
        ),
    ),
    KotlinCase(
        name="semicolons",
        source="val a = 1; val b = 2;\nfun g() { a; b }\n",
    ),
    KotlinCase(
        name="property_accessors",
        source=_dedent(
            """
            class Box {
                val size: Int
                    get() = items.size
                var name = ""
                    private set
                var count = 0
                    get() {
                        return field
                    }
                    set(value) {
                        field = value
                    }
            }
            val top: String
                get() = "top"
            """
        ),
    ),
    KotlinCase(
        name="function_types",
        source=_dedent(
            """
            val onClick: () -> Unit = {}
            fun apply(block: (value: Int, String) -> Boolean): Boolean = block(1, "a")
            """
        ),
    ),
    KotlinCase(
        name="object_expression",
        source=_dedent(
            """
            val task = object : Runnable {
                override fun run() {}
            }
            """
        ),
    ),
    KotlinCase(
        name="callable_references",
        source=_dedent(
            """
            val f = ::foo
            val length = String::length
            val kind = Foo::class
            val names = items.map(Item::name)
            """
        ),
    ),
    KotlinCase(
        name="enum_class",
        source=_dedent(
            """
            enum class Color(val rgb: Int) {
                RED(1),
                GREEN(2) {
                    override fun label() = "green"
                },
                BLUE(3);

                open fun label() = name
            }

            enum class Direction { NORTH, SOUTH, }
            """
        ),
    ),
    KotlinCase(name="empty_statements", source="val a = 1;;\nfun f() { ; }\n"),
    KotlinCase(
        name="trailing_commas",
        source=_dedent(
            """
            val xs = listOf(1, 2,)
            fun sum(
                a: Int,
                b: Int,
            ) = a + b
            """
        ),
    ),
    KotlinCase(name="crlf_line_endings", source="val a = 1\r\nval b = 2\r\n"),
    KotlinCase(name="byte_order_mark", source="\ufeffval a = 1\n"),
    KotlinCase(name="trailing_whitespace_at_eof", source="val a = 1\n\n   "),
)


UNSUPPORTED_CASES: tuple[KotlinCase, ...] = (
    KotlinCase(name="typealias", source="typealias Name = String\n"),
    KotlinCase(name="spread_argument", source="val all = listOf(*items)\n"),
)


PARSE_ERROR_CASES: tuple[KotlinCase, ...] = (
    KotlinCase(name="unterminated_string", source='val s = "open\n'),
    KotlinCase(name="missing_closing_brace", source="fun f() {\n"),
    KotlinCase(name="missing_expression", source="val x = \n"),
)


def case_id(case: KotlinCase) -> str:
    return case.name
