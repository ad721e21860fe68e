"""層間インターフェース定義。

全ての層はこのパッケージのデータモデル・抽象クラス・例外にのみ依存する。
backend/store/ の実装に直接依存してはならない。
"""
