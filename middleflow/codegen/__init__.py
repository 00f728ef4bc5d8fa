"""C# code generation for middleflow."""

from .csharp import CSharpCodeGenerator, generate_csharp_code

__all__ = ["CSharpCodeGenerator", "generate_csharp_code"]
