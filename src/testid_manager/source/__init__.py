"""Source adapters: parse files into editable trees and print them back."""
